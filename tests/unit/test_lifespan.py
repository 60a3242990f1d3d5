"""Unit tests for application startup and shutdown."""

from filestore.main import create_app
from filestore.shared.utils.generators import (
    MAX_WORKER_ID,
    SEQUENCE_BITS,
    configure_id_generator,
    generate_id,
)


class TestLifespan:
    async def test_startup_configures_worker_and_shutdown_clears_clients(
        self, settings_env, provider
    ) -> None:
        settings_env(id_worker_id=9)
        app = create_app()

        async with app.router.lifespan_context(app):
            assert (generate_id() >> SEQUENCE_BITS) & MAX_WORKER_ID == 9
            app.state.provider_registry.register_factory(
                provider.provider_type, lambda config, base_url: object()
            )
            app.state.provider_registry.get_provider_client(provider)
            assert len(app.state.provider_registry) == 1

        assert len(app.state.provider_registry) == 0
        configure_id_generator(0)
