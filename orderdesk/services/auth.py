from typing import AbstractSet, Optional, Union


def is_admin(user_id: Optional[Union[int, str]], admin_ids: AbstractSet[str]) -> bool:
    """True iff ``user_id`` is one of the configured operator ids."""
    if user_id is None:
        return False
    key = str(user_id).strip()
    return bool(key) and key in admin_ids
