# community/decorators.py
from functools import wraps

from django.http import JsonResponse


def user_type_required(*user_types):
    """
    Restrict a view to users whose `user_type` is one of `user_types`.
    Place it under the authentication decorators so `request.user` is set.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped_view(request, *args, **kwargs):
            user = request.user
            if not user.is_authenticated or user.user_type not in user_types:
                return JsonResponse({'success': False, 'message': 'Unauthorized.', 'code': 'unauthorized'}, status=403)
            return view_func(request, *args, **kwargs)
        return _wrapped_view
    return decorator
