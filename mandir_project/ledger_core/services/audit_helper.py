from ..models import AuditLog


def log_action(*, action: str, instance, user=None, changes: dict | None = None):
    """
    Central audit logger.
    Call inside the posting transaction so the row commits or rolls back with it.
    """
    if user is not None and not getattr(user, "is_authenticated", False):
        # anonymous requests are recorded without a user
        user = None

    AuditLog.objects.create(
        user=user,
        action=action,
        object_type=instance.__class__.__name__,
        object_id=str(instance.pk),
        changes=changes,
    )
