"""
Subscriptions (preapprovals): create and search.
"""

from .builders import SubscriptionCreateBuilder, SubscriptionSearchBuilder
from .types import (
    AutoRecurring,
    FreeTrial,
    FrequencyType,
    Subscription,
    SubscriptionCreateOptions,
    SubscriptionSearchOptions,
    SubscriptionSemaphore,
    SubscriptionStatus,
    SubscriptionSummarized,
    default_auto_recurring,
)

__all__ = [
    "AutoRecurring",
    "FreeTrial",
    "FrequencyType",
    "Subscription",
    "SubscriptionCreateBuilder",
    "SubscriptionCreateOptions",
    "SubscriptionSearchBuilder",
    "SubscriptionSearchOptions",
    "SubscriptionSemaphore",
    "SubscriptionStatus",
    "SubscriptionSummarized",
    "default_auto_recurring",
]
