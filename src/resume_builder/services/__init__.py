"""Services"""

from resume_builder.services.payments import (
    PLANS,
    initiate_payment,
    use_download_credit,
    verify_payment,
)
from resume_builder.services.resume_store import (
    create_resume,
    delete_resume,
    duplicate_resume,
    get_resume,
    list_resumes,
    update_resume,
)
from resume_builder.services.users import ensure_user, get_user, set_premium

__all__ = [
    "create_resume",
    "delete_resume",
    "duplicate_resume",
    "get_resume",
    "list_resumes",
    "update_resume",
    "ensure_user",
    "get_user",
    "set_premium",
    "PLANS",
    "initiate_payment",
    "verify_payment",
    "use_download_credit",
]
