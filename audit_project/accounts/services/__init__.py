from .target_audit_service import (
    assign_target_audit,
    clear_target_audit,
)

__all__ = [
    "assign_target_audit",
    "clear_target_audit",
]
