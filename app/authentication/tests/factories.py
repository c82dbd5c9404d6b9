"""
Factory Boy factories for authentication models.

Provides realistic test data generation for:
- User: Custom user model linked to a Firebase uid
- Profile fields via display_name / avatar_url kwargs

Usage:
    from authentication.tests.factories import UserFactory

    user = UserFactory()
    user = UserFactory(email_verified=True, display_name="Ada")
"""

import factory

from authentication.models import User


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Users get a Firebase uid and an auto-created profile (via signals).
    Pass display_name / avatar_url to fill the profile.

    Examples:
        user = UserFactory()
        user = UserFactory(is_active=False)
        user = UserFactory(display_name="Grace Hopper")
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    firebase_uid = factory.Sequence(lambda n: f"firebase-uid-{n}")
    email_verified = True
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        display_name = kwargs.pop("display_name", None)
        avatar_url = kwargs.pop("avatar_url", None)
        password = kwargs.pop("password", None)

        user = model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )

        if display_name is not None or avatar_url is not None:
            profile = user.profile
            if display_name is not None:
                profile.display_name = display_name
            if avatar_url is not None:
                profile.avatar_url = avatar_url
            profile.save()

        return user
