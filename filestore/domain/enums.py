"""Domain enumerations for file storage.

ProviderType tags which backend implementation serves a provider row;
ReferenceType controls storage key layout and default size limits.
"""

from enum import Enum


class ProviderType(str, Enum):
    """Storage backend kind for a configured provider."""

    LOCAL = "LOCAL"
    VERCEL_BLOB = "VERCEL_BLOB"
    ALIYUN_OSS = "ALIYUN_OSS"
    AWS_S3 = "AWS_S3"
    TENCENT_COS = "TENCENT_COS"
    QINIU = "QINIU"
    UPYUN = "UPYUN"
    MINIO = "MINIO"


class ReferenceType(str, Enum):
    """What an uploaded file is used for.

    Determines the storage key layout and the default size ceiling.
    """

    POST = "POST"
    AVATAR = "AVATAR"
    EXPRESSION = "EXPRESSION"
    SITE = "SITE"
    OTHER = "OTHER"
