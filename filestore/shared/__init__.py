"""Cross-cutting helpers shared by every layer. No business logic."""
