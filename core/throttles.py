# core/throttles.py

from rest_framework.throttling import ScopedRateThrottle


class UserScopedPostThrottle(ScopedRateThrottle):
    """
    Throttle POSTs per user per scope.

    Cache key shape:
      throttle_<scope>_u<user_id>
    Anonymous requests and other methods are not throttled here.
    """

    def get_cache_key(self, request, view):
        if request.method != "POST":
            return None

        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return None

        return f"throttle_{self.scope}_u{user.id}"


class InviteThrottle(UserScopedPostThrottle):
    """Coordinator, judge and team invitations. Scope key: 'invite'"""
    scope = "invite"


class JoinRequestThrottle(UserScopedPostThrottle):
    """Join requests sent to teams. Scope key: 'join-request'"""
    scope = "join-request"
