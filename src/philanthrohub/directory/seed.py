"""Organizations loaded into the directory at startup."""

from __future__ import annotations

from .models import Organization

_SEED_IMAGE = "https://images.unsplash.com/photo-1488521787991-ed7bbaae773c?auto=format&fit=crop&q=80"

_SEED_RECORDS = (
    {
        "id": "1",
        "name": "American Red Cross",
        "description": "Prevents and alleviates human suffering in the face of emergencies.",
        "category": "Disaster Relief",
        "tags": ["Disaster Relief", "Blood Donation", "Verified"],
        "country": "USA",
        "website": "https://www.redcross.org",
        "verified": True,
    },
    {
        "id": "2",
        "name": "Room to Read",
        "description": "Builds literacy skills and a habit of reading among primary school children.",
        "category": "Education",
        "tags": ["Education", "Literacy", "Verified"],
        "country": "Global",
        "website": "https://www.roomtoread.org",
        "verified": True,
    },
    {
        "id": "3",
        "name": "Doctors Without Borders",
        "description": "Delivers emergency medical care to people affected by conflict and epidemics.",
        "category": "Healthcare",
        "tags": ["Healthcare", "Emergency Medicine", "Verified"],
        "country": "Global",
        "website": "https://www.msf.org",
        "verified": True,
    },
    {
        "id": "4",
        "name": "World Wildlife Fund",
        "description": "Conserves nature and reduces the most pressing threats to biodiversity.",
        "category": "Environment",
        "tags": ["Environment", "Wildlife", "Verified"],
        "country": "Global",
        "website": "https://www.worldwildlife.org",
        "verified": True,
    },
    {
        "id": "5",
        "name": "Amnesty International",
        "description": "Campaigns for a world where human rights are enjoyed by all.",
        "category": "Human Rights",
        "tags": ["Human Rights", "Advocacy", "Verified"],
        "country": "UK",
        "website": "https://www.amnesty.org",
        "verified": True,
    },
    {
        "id": "6",
        "name": "ASPCA",
        "description": "Provides effective means for the prevention of cruelty to animals.",
        "category": "Animal Welfare",
        "tags": ["Animal Welfare", "Rescue", "Verified"],
        "country": "USA",
        "website": "https://www.aspca.org",
        "verified": True,
    },
    {
        "id": "7",
        "name": "Pratham Education Foundation",
        "description": "Improves the quality of education for underprivileged children in India.",
        "category": "Education",
        "tags": ["Education", "Children"],
        "country": "India",
        "website": "https://www.pratham.org",
        "verified": False,
    },
    {
        "id": "8",
        "name": "Goonj",
        "description": "Turns urban surplus material into a resource for rural development and relief.",
        "category": "Disaster Relief",
        "tags": ["Disaster Relief", "Rural Development"],
        "country": "India",
        "website": "https://goonj.org",
        "verified": False,
    },
)


def seed_organizations() -> list[Organization]:
    """Return fresh copies of the bundled organizations in listing order."""
    return [Organization(image=_SEED_IMAGE, **record) for record in _SEED_RECORDS]


__all__ = ["seed_organizations"]
