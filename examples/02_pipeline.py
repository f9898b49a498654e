"""
Pipeline example: routing, authentication and body parsing stages.

Demonstrates:
- RouteMatch storing path parameters as attributes
- BearerToken storing the decoded user as an attribute
- JSONBody filling body params
- A custom stage reading what earlier stages wrote
"""

from fastapi import Depends, FastAPI

from fastapi_incoming_request import (
    BearerToken,
    IncomingRequest,
    JSONBody,
    Pipeline,
    RequestStage,
    RouteMatch,
    StageAbort,
    StageCategory,
    incoming_request_dependency,
)

app = FastAPI(title="Incoming Request Pipeline Example")


async def decode_token(token: str) -> dict:
    """Decode a bearer token."""
    # Mock implementation
    if token == "valid-token":
        return {"sub": "user123", "owner_of": [1, 2]}
    raise ValueError("Invalid token")


class OwnsOrder(RequestStage):
    """Rejects requests for orders the user does not own."""

    category = StageCategory.CUSTOM

    async def process(self, request: IncomingRequest) -> None:
        user = request.attribute("user", {})
        if request.attribute("order_id") not in user.get("owner_of", []):
            raise StageAbort("Not your order", status_code=403)


order_pipeline = Pipeline(
    RouteMatch("/orders/{order_id:int}"),
    BearerToken(decode=decode_token),
    JSONBody(),
    OwnsOrder(),
)


@app.patch("/orders/{order_id}")
async def update_order(
    incoming: IncomingRequest = Depends(incoming_request_dependency(order_pipeline)),
):
    return {
        "order_id": incoming.attribute("order_id"),
        "changes": incoming.body_params,
        "user": incoming.attribute("user")["sub"],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
