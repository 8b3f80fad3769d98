"""SQL persistence: table models and the asyncio engine."""
