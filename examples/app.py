"""
routechain example application

Demonstrates:
- Routing with path parameters and constraints
- Chain middleware (security headers, access log, exception handling)
- Handlers that continue the chain and handlers that end it
- Mounting a sub router under a prefix
- Lifespan events

To run this application:
    routechain dev --app-file examples/app.py
or:
    uvicorn app:app --reload --app-dir examples
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from routechain import RouteChain, Router, Settings
from routechain.logger import configure_logging
from routechain.middleware import (
    ExceptionMiddleware,
    HttpHeadersMiddleware,
    RequestLoggerMiddleware,
    TimeoutMiddleware,
)

settings = Settings.from_env(json_logs=False)
logger = configure_logging(settings)

app = RouteChain(settings=settings)


class User(BaseModel):
    id: int
    name: str
    email: Optional[str] = None


USERS: Dict[int, User] = {
    1: User(id=1, name="Ada Lovelace", email="ada@example.com"),
    2: User(id=2, name="Alan Turing"),
}

# ============================================================================
# 1. MIDDLEWARE
# ============================================================================

# Registered before any route, so every route below gets them in this order
app.use_middleware(
    RequestLoggerMiddleware(),
    ExceptionMiddleware(mode="debug" if settings.debug else "production"),
    HttpHeadersMiddleware(),
    TimeoutMiddleware(5),
)


async def load_user(request, response, next):
    user = USERS.get(int(request.params["user_id"]))
    if user is None:
        response.json({"detail": "User not found"}, status_code=404)
        return
    request.extensions.user = user
    await next()


# ============================================================================
# 2. ROUTES
# ============================================================================


@app.route("GET", "/")
async def home(request, response):
    response.text("routechain example. Try /users, /users/1 or /api/health")


@app.route("GET", "/users")
async def list_users(request, response):
    users: List[User] = list(USERS.values())
    limit = request.query_params.get("limit")
    if limit and limit.isdigit():
        users = users[: int(limit)]
    response.json([user.model_dump() for user in users])


async def show_user(request, response):
    response.json(request.extensions.user.model_dump())


# the constraint keeps "/users/me" and friends from reaching load_user
app.get(r"/users/:user_id(\d+)", load_user, show_user)


@app.route("GET", "/reports/:year/:month?")
async def show_report(request, response):
    response.json({"year": request.params["year"], "month": request.params.get("month")})


# ============================================================================
# 3. SUB ROUTER
# ============================================================================

api = Router()


@api.route("GET", "/health")
async def health(request, response):
    response.json({"status": "ok"})


@api.route("GET", "/echo/:message")
def echo(request, response):
    response.text(request.params["message"])


app.use_subrouter("/api", api)

# ============================================================================
# 4. LIFESPAN
# ============================================================================


@app.on_event("startup")
async def startup():
    logger.info("Loaded %d users", len(USERS))


@app.on_event("shutdown")
async def shutdown():
    logger.info("Shutting down")
