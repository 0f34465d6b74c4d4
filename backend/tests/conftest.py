import pytest

from veris_search.incidents.store import InMemoryIncidentStore


def _incidents():
    return [
        {
            "_id": "a1",
            "incident_id": "INC-0001",
            "summary": "Phishing attack on Acme Corp",
            "victim": {"name": "Acme Corp", "industry": "522110", "country": ["US"], "state": "NY"},
            "actor": {"external": {"variety": ["Organized crime"]}},
            "action": {"social": {"variety": ["Phishing"]}},
            "asset": {"assets": [{"variety": "P - End-user"}, {"variety": "S - Mail"}]},
            "confidence": "High",
        },
        {
            "_id": "a2",
            "incident_id": "INC-0002",
            "summary": "Stolen laptop from employee car",
            "victim": {"name": "Globex", "industry": "621111", "country": ["CA"]},
            "actor": {"internal": {"variety": "End-user"}, "external": {"variety": ["Unknown"]}},
            "action": {"physical": {"variety": ["Theft"]}},
            "asset": {"assets": [{"variety": "U - Laptop"}]},
            "targeted": "Opportunistic",
        },
        {
            "_id": "a3",
            "incident_id": "INC-0003",
            "summary": "Ransomware (via RDP) hits hospital",
            "victim": {"name": "St. Mary's", "industry": "622110"},
            "actor": {"external": {"variety": ["Organized crime", "Nation-state"]}},
            "action": {
                "hacking": {"variety": ["Use of stolen creds"]},
                "malware": {"variety": ["Ransomware"]},
            },
            "asset": {"assets": [{"variety": "S - Database"}]},
            "security_incident": "Confirmed",
        },
        {
            "_id": "a4",
            "incident_id": "INC-0004",
            "reference": "http://example.com/misdelivery",
            "actor": {"partner": {"variety": ["Unknown"]}},
            "action": {"misuse": {"variety": ["Privilege abuse"]}},
        },
    ]


@pytest.fixture()
def incidents():
    return _incidents()


@pytest.fixture()
def store(incidents):
    return InMemoryIncidentStore(incidents)
