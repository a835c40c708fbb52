import uuid


def new_public_id() -> str:
    return str(uuid.uuid4())
