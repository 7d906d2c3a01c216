from school_billing.utils.datetime_utils import DateTimeHelper

__all__ = ["DateTimeHelper"]
