from django.utils.functional import SimpleLazyObject

from .roles import Principal


class PrincipalMiddleware:
    """
    Attach ``request.principal``: an immutable snapshot of the caller's
    identity and roles, built from ``request.user``.
    Must run after ``AuthenticationMiddleware``.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.principal = SimpleLazyObject(lambda: Principal.from_user(request.user))
        return self.get_response(request)
