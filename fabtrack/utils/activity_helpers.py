from sqlalchemy.ext.asyncio import AsyncSession
from fabtrack.models.support.activity_models import OrderActivity
from fabtrack.constants.activity_templates import ACTIVITY_TEMPLATES
from fabtrack.constants.activity_codes import ActivityCode


async def emit_activity(
    db: AsyncSession,
    *,
    actor_email: str,
    actor_role: str,
    code: ActivityCode,
    order_id: str | None = None,
    is_override: bool = False,
    **context,
):
    template = ACTIVITY_TEMPLATES.get(code)
    if not template:
        raise ValueError(f"No activity template for code {code}")

    try:
        message = template.format(
            actor_email=actor_email,
            actor_role=actor_role.capitalize(),
            order_id=order_id,
            **context,
        )
    except KeyError as e:
        raise ValueError(
            f"Missing activity context key: {e.args[0]} for {code}"
        )

    db.add(
        OrderActivity(
            actor_email=actor_email,
            actor_role=actor_role,
            order_id=order_id,
            code=code.value,
            message=message,
            is_override=is_override,
        )
    )
