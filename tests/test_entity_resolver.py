"""Tests for resolving client and professional references."""

import pytest

from cleanops.utils.entity_resolver import resolve_client, resolve_professional


def test_resolve_client_by_name(client_service, sample_client):
    assert resolve_client(client_service, "Jane Smith") == sample_client.id
    assert resolve_client(client_service, "  jane smith ") == sample_client.id


def test_resolve_client_by_id(client_service, sample_client):
    assert resolve_client(client_service, sample_client.id) == sample_client.id
    assert resolve_client(client_service, str(sample_client.id)) == sample_client.id


def test_resolve_client_unknown(client_service, sample_client):
    with pytest.raises(ValueError, match="Client 'Nobody' not found"):
        resolve_client(client_service, "Nobody")
    with pytest.raises(ValueError, match="Client ID 99 not found"):
        resolve_client(client_service, "99")


def test_resolve_ambiguous_name(client_service, sample_client):
    other_id = client_service.create_client(
        name="Jane Smith",
        email="jane.smith@example.com",
        phone="07700 900999",
        address="2 Low Road",
        postcode="EH1 1YZ",
        city="Edinburgh",
        price_per_hour="22",
    )
    with pytest.raises(ValueError, match=f"ambiguous \\(IDs {sample_client.id}, {other_id}\\)"):
        resolve_client(client_service, "Jane Smith")


def test_resolve_professional(professional_service, sample_professionals):
    maria, ana = sample_professionals
    assert resolve_professional(professional_service, "ANA SILVA") == ana.id
    assert resolve_professional(professional_service, maria.id) == maria.id
    with pytest.raises(ValueError, match="Professional ID 42 not found"):
        resolve_professional(professional_service, 42)
