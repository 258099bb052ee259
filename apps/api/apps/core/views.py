"""
Core views.
"""
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .context import Actor


class CurrentActorView(APIView):
    """
    Identity of the authenticated caller as the POS services see it.

    GET /api/me/ -> {"actor_id": "...", "role": "Sales Management", "username": "..."}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        actor = Actor.from_user(request.user)
        return Response({
            'actor_id': actor.actor_id,
            'role': actor.role,
            'username': request.user.get_username(),
        })
