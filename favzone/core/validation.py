MACHINES = (1, 2)

def is_valid_machine(n: int) -> bool:
    return isinstance(n, int) and n in MACHINES

def is_image_upload(content_type: str | None) -> bool:
    return (content_type or "").startswith("image/")
