"""
Typed exception hierarchy for the office kernel.

Every error has a typed class (catch by type, not by message), a ``code``
class attribute (machine-readable, API-safe) and structured attributes
for the data that caused it.

    OfficeKernelError (base)
    |
    +-- TemplateError
    |   +-- UnknownFrequencyError
    |   +-- TemplateParseError
    |   +-- InvalidPatchError
    |   +-- TemplateNotFoundError
    |
    +-- StatusError
    |   +-- UnknownStatusError
    |
    +-- LeaveError
    |   +-- InvalidLeaveTransitionError
    |   +-- MissingDecisionReasonError
    |   +-- InvalidLeaveDatesError
    |   +-- LeaveRequestNotFoundError
    |
    +-- NotificationError
    |   +-- NotificationNotFoundError
    |
    +-- ConfigError
        +-- SettingsNotFoundError

Leave-draft rule violations are NOT exceptions: the validator returns
them as a list so the caller can show all of them at once.  Exceptions
here are for malformed records, illegal state transitions and
programming errors.

Handling pattern::

    try:
        request = approve(request, reason, approver_id)
    except InvalidLeaveTransitionError as e:
        api_response(code=e.code, status=e.current_status)
"""


class OfficeKernelError(Exception):
    """
    Base exception for all office kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "OFFICE_KERNEL_ERROR"


# Template / recurrence exceptions


class TemplateError(OfficeKernelError):
    """Base exception for recurring-template errors."""

    code: str = "TEMPLATE_ERROR"


class UnknownFrequencyError(TemplateError):
    """Frequency value is not one of the closed recurrence set."""

    code: str = "UNKNOWN_FREQUENCY"

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Unknown recurrence frequency {value!r}; "
            f"expected one of Monthly, Quarterly, Annually"
        )


class TemplateParseError(TemplateError):
    """A stored template row could not be turned into a typed template."""

    code: str = "TEMPLATE_PARSE_ERROR"

    def __init__(self, template_ref: str, field: str, detail: str):
        self.template_ref = template_ref
        self.field = field
        self.detail = detail
        super().__init__(
            f"Template {template_ref}: invalid field '{field}': {detail}"
        )


class InvalidPatchError(TemplateError):
    """Patch names a field the target template does not have."""

    code: str = "INVALID_PATCH"

    def __init__(self, template_id: str, field: str, reason: str):
        self.template_id = template_id
        self.field = field
        self.reason = reason
        super().__init__(
            f"Cannot patch '{field}' on template {template_id}: {reason}"
        )


class TemplateNotFoundError(TemplateError):
    """Template with given ID was not found."""

    code: str = "TEMPLATE_NOT_FOUND"

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Recurring template not found: {template_id}")


# Status exceptions


class StatusError(OfficeKernelError):
    """Base exception for lifecycle status errors."""

    code: str = "STATUS_ERROR"


class UnknownStatusError(StatusError):
    """Raw status string does not map to any member of the status enum."""

    code: str = "UNKNOWN_STATUS"

    def __init__(self, entity_type: str, value: object):
        self.entity_type = entity_type
        self.value = value
        super().__init__(f"Unknown {entity_type} status: {value!r}")


# Leave request exceptions


class LeaveError(OfficeKernelError):
    """Base exception for leave request errors."""

    code: str = "LEAVE_ERROR"


class InvalidLeaveTransitionError(LeaveError):
    """Requested transition is not allowed from the current status."""

    code: str = "INVALID_LEAVE_TRANSITION"

    def __init__(self, request_id: str, current_status: str, action: str):
        self.request_id = request_id
        self.current_status = current_status
        self.action = action
        super().__init__(
            f"Leave request {request_id} cannot '{action}' "
            f"from status '{current_status}'"
        )


class MissingDecisionReasonError(LeaveError):
    """Approve/reject/reschedule attempted without a reason."""

    code: str = "MISSING_DECISION_REASON"

    def __init__(self, request_id: str, action: str):
        self.request_id = request_id
        self.action = action
        super().__init__(
            f"A non-empty reason is required to {action} leave request {request_id}"
        )


class InvalidLeaveDatesError(LeaveError):
    """End date precedes start date."""

    code: str = "INVALID_LEAVE_DATES"

    def __init__(self, request_id: str, start_date: str, end_date: str):
        self.request_id = request_id
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Leave request {request_id}: end date {end_date} "
            f"is before start date {start_date}"
        )


class LeaveRequestNotFoundError(LeaveError):
    """Leave request with given ID was not found."""

    code: str = "LEAVE_REQUEST_NOT_FOUND"

    def __init__(self, request_id: str):
        self.request_id = request_id
        super().__init__(f"Leave request not found: {request_id}")


# Notification exceptions


class NotificationError(OfficeKernelError):
    """Base exception for notification errors."""

    code: str = "NOTIFICATION_ERROR"


class NotificationNotFoundError(NotificationError):
    """Notification id does not refer to an invoice or expense."""

    code: str = "NOTIFICATION_NOT_FOUND"

    def __init__(self, notification_id: str):
        self.notification_id = notification_id
        super().__init__(f"Notification not found: {notification_id}")


# Configuration exceptions


class ConfigError(OfficeKernelError):
    """Base exception for configuration errors."""

    code: str = "CONFIG_ERROR"


class SettingsNotFoundError(ConfigError):
    """No settings fragment exists for the tenant nor a default."""

    code: str = "SETTINGS_NOT_FOUND"

    def __init__(self, tenant: str, config_dir: str):
        self.tenant = tenant
        self.config_dir = config_dir
        super().__init__(
            f"No settings for tenant '{tenant}' (and no default) in {config_dir}"
        )
