############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# metrics.py: Prometheus metric definitions
#
############################################################

"""Prometheus metrics shared by services and the /metrics endpoint."""

from prometheus_client import Counter

LOGIN_ATTEMPTS = Counter(
    "xarwiz_login_attempts_total",
    "Login attempts by resolved role and outcome",
    ["role", "outcome"],  # role: admin, author, unknown; outcome: success, failure
)
COUNTER_ADJUSTMENTS = Counter(
    "xarwiz_counter_adjustments_total",
    "Denormalized counter updates issued",
    ["entity", "direction"],  # entity: category, tag, post; direction: inc, dec
)
POSTS_MUTATED = Counter(
    "xarwiz_posts_mutated_total",
    "Blog post writes by action and actor role",
    ["action", "role"],
)
