class AuditEvents:
    # Accounts
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGIN_BLOCKED = "login_blocked"
    PASSWORD_CHANGED = "password_changed"

    # Salespersons
    SALESPERSON_CREATED = "salesperson_created"
    SALESPERSON_UPDATED = "salesperson_updated"
    SALESPERSON_DEACTIVATED = "salesperson_deactivated"

    # Customers
    CUSTOMER_CREATED = "customer_created"
    CUSTOMER_UPDATED = "customer_updated"
    CUSTOMER_DEACTIVATED = "customer_deactivated"

    # Reports
    REPORT_CREATED = "report_created"
    REPORT_UPDATED = "report_updated"
    REPORT_DELETED = "report_deleted"
    REPORT_SUBMITTED = "report_submitted"
    REPORT_WITHDRAWN = "report_withdrawn"
    REPORT_APPROVED = "report_approved"
    REPORT_REJECTED = "report_rejected"
    REPORT_TRANSITION_DENIED = "report_transition_denied"

    # Visits / attachments / comments
    VISIT_CREATED = "visit_created"
    VISIT_UPDATED = "visit_updated"
    VISIT_DELETED = "visit_deleted"
    ATTACHMENT_UPLOADED = "attachment_uploaded"
    ATTACHMENT_DELETED = "attachment_deleted"
    COMMENT_CREATED = "comment_created"
    COMMENT_DELETED = "comment_deleted"
