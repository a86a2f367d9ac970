from quotevault.api.routes.router import router

__all__ = ["router"]
