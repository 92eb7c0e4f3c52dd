"""Main application entry point."""

from guild_events.config.environment import IS_PRODUCTION_ENVIRONMENT, PORT
from guild_events.api.app import app

if __name__ == "__main__":
    import uvicorn

    if not IS_PRODUCTION_ENVIRONMENT:
        # Development mode - use direct app instance for better debugging
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=PORT,
            log_level="debug"
        )
    else:
        # Production mode - a single worker, the event cache and interest counters live in-process
        uvicorn.run(
            "guild_events.api.app:app",
            host="0.0.0.0",
            port=PORT,
            reload=False,
            workers=1,
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*"
        )
