from pydantic import BaseModel


class RequestContext(BaseModel):
    """
    Trusted request context.
    This is the only object routes should trust for the caller's identity.
    """
    account_id: str
    session_id: str
