from fastapi import Header


def current_user_id(x_user_id: int = Header(..., alias="X-User-Id")) -> int:
    """
    Id of the calling user. Token verification happens upstream (gateway /
    auth service); this service only trusts the forwarded header.
    """
    return x_user_id
