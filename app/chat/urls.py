"""
URL configuration for chat API.

URL Structure:
    Channels:
        /channels/                               GET, POST
        /channels/{id}/                          GET, PATCH, DELETE

    Channel members:
        /channel-members/?member_ids=1,2,3       GET
        /channel-members/                        POST
        /channel-members/{id}/                   PATCH, DELETE
        /channel-members/common-channels/        GET
        /channel-members/members-info/           GET

    Messages:
        /messages/?channel_id=N                  GET, POST
        /messages/{id}/                          GET, PATCH, DELETE
        /messages/last/                          GET

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import ChannelMemberViewSet, ChannelViewSet, MessageViewSet

app_name = "chat"

router = DefaultRouter()
router.register(r"channels", ChannelViewSet, basename="channel")
router.register(r"channel-members", ChannelMemberViewSet, basename="channel-member")
router.register(r"messages", MessageViewSet, basename="message")

urlpatterns = [
    path("", include(router.urls)),
]
