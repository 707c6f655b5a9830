"""
Offline demo actors.

Served by the actor directory when the database cannot be reached, and
used by ``manage.py seed_bureau`` to populate a fresh installation with
one account per role.
"""

from core.permissions_constants import RoleId

DEMO_ACTORS: tuple[dict, ...] = (
    {
        "id": 1,
        "username": "overseer",
        "email": "overseer@bureau.local",
        "real_name": "Bureau Overseer",
        "role": RoleId.SENTINEL,
        "is_active": True,
        "is_master_actor": True,
    },
    {
        "id": 2,
        "username": "highjudge",
        "email": "high.judge@bureau.local",
        "real_name": "Aldous Varn",
        "role": RoleId.HIGH_JUDGE,
        "is_active": True,
        "is_master_actor": False,
    },
    {
        "id": 3,
        "username": "judge",
        "email": "judge@bureau.local",
        "real_name": "Mira Castell",
        "role": RoleId.JUDGE,
        "is_active": True,
        "is_master_actor": False,
    },
    {
        "id": 4,
        "username": "counsel",
        "email": "counsel@bureau.local",
        "real_name": "Tobin Reyes",
        "role": RoleId.LEGAL_AUTHORITY,
        "is_active": True,
        "is_master_actor": False,
    },
    {
        "id": 5,
        "username": "tracker",
        "email": "tracker@bureau.local",
        "real_name": "Kessa Drey",
        "role": RoleId.BOUNTY_HUNTER,
        "is_active": True,
        "is_master_actor": False,
    },
    {
        "id": 6,
        "username": "citizen",
        "email": "citizen@bureau.local",
        "real_name": "Pell Osric",
        "role": RoleId.CITIZEN,
        "is_active": True,
        "is_master_actor": False,
    },
)
