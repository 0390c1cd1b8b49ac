"""Cross-cutting helpers: request context, logging, id and datetime utilities."""
