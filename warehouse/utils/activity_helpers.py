from sqlalchemy.ext.asyncio import AsyncSession
from warehouse.models.support.activity_models import UserActivity
from warehouse.constants.activity_templates import ACTIVITY_TEMPLATES
from warehouse.constants.activity_codes import ActivityCode


def render_activity(code: ActivityCode, **context) -> str:
    template = ACTIVITY_TEMPLATES.get(code)
    if not template:
        raise ValueError(f"No activity template for code {code}")

    try:
        return template.format(**context)
    except KeyError as e:
        raise ValueError(
            f"Missing activity context key: {e.args[0]} for {code}"
        )


def actor_context(actor) -> dict:
    """actor_role/actor_email template keys for a user, or the system account."""
    if actor is None:
        return {"actor_role": "System", "actor_email": "system"}
    role = actor.role.value if hasattr(actor.role, "value") else str(actor.role)
    return {"actor_role": role.capitalize(), "actor_email": actor.email}


async def emit_activity(
    db: AsyncSession,
    *,
    user_id: str | None,
    username: str,
    code: ActivityCode,
    **context,
):
    db.add(
        UserActivity(
            user_id=user_id,
            username_snapshot=username,
            message=render_activity(code, **context),
        )
    )
