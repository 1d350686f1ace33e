"""What each account role is allowed to do.

Routes ask for a capability instead of comparing role strings, so a new role
only needs an entry here.
"""

BOOK_SERVICES = "book_services"
MAKE_PAYMENTS = "make_payments"
GIVE_FEEDBACK = "give_feedback"
LIST_SERVICES = "list_services"
MANAGE_BOOKINGS = "manage_bookings"
MANAGE_ACCOUNTS = "manage_accounts"

ROLE_CAPABILITIES = {
    "customer": frozenset({BOOK_SERVICES, MAKE_PAYMENTS, GIVE_FEEDBACK}),
    "vendor": frozenset({LIST_SERVICES, MANAGE_BOOKINGS}),
    "admin": frozenset({MANAGE_ACCOUNTS, MANAGE_BOOKINGS}),
}

SIGNUP_ROLES = ("customer", "vendor")


def capabilities_for(role):
    return ROLE_CAPABILITIES.get(role, frozenset())


def can(user, capability):
    return user is not None and capability in capabilities_for(user.role)


def is_admin(user):
    return can(user, MANAGE_ACCOUNTS)
