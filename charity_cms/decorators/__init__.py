from charity_cms.decorators.with_retry import RETRIABLE_EXCEPTIONS, with_retry

__all__ = ["RETRIABLE_EXCEPTIONS", "with_retry"]
