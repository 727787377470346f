from allauth.account.adapter import DefaultAccountAdapter
from django.urls import reverse

from core.models import Profile


class RoleBasedAccountAdapter(DefaultAccountAdapter):
    """Redirect users based on their role after login.

    Admins land on the Django admin. Everyone else lands on their approval
    queue, which lists a coordinator's own events and an approver's pending
    work.
    """

    def get_login_redirect_url(self, request):
        user = request.user
        role = getattr(getattr(user, "profile", None), "role", None)
        if user.is_superuser or role == Profile.Role.ADMIN:
            return reverse("admin:index")
        return reverse("emt:approval_queue")
