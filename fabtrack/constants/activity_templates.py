from fabtrack.constants.activity_codes import ActivityCode


ACTIVITY_TEMPLATES = {
    # ---------------- AUTH ----------------
    ActivityCode.LOGIN:
        "{actor_role} ({actor_email}) logged in",

    ActivityCode.LOGOUT:
        "{actor_role} ({actor_email}) logged out",

    ActivityCode.CHANGE_PASSWORD:
        "{actor_role} ({actor_email}) changed their password",

    # ---------------- ORDERS ----------------
    ActivityCode.CREATE_ORDER:
        "{actor_role} ({actor_email}) created order {order_id} for {client_email}",

    ActivityCode.DELETE_ORDER:
        "{actor_role} ({actor_email}) deleted order {order_id}",

    ActivityCode.UPDATE_STAGE_DATA:
        "{actor_role} ({actor_email}) updated {stage} details of order {order_id}: {changes}",

    ActivityCode.ADVANCE_STAGE:
        "{actor_role} ({actor_email}) moved order {order_id} from {from_stage} to {to_stage}",

    # ---------------- DECISIONS ----------------
    ActivityCode.CLIENT_DECISION:
        "{actor_role} ({actor_email}) answered {decision} = {value} on order {order_id} ({stage_change})",

    ActivityCode.ADMIN_OVERRIDE:
        "[OVERRIDE] {actor_role} ({actor_email}) answered {decision} = {value} on behalf of "
        "the client on order {order_id} ({stage_change})",
}
