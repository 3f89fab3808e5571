"""
Tests for AWSDomainService (Route 53 alias records).
"""

import pytest
from unittest.mock import MagicMock
from botocore.exceptions import ClientError

from conftest import BASE_DOMAIN, ZONE_ID, make_settings


DIST_DOMAIN = "d123.cloudfront.net"


def _make_client_error(code: str = "InvalidChangeBatch") -> ClientError:
    return ClientError(
        {"Error": {"Code": code, "Message": "Mocked AWS error"}},
        "ChangeResourceRecordSets",
    )


def _make_service(**overrides):
    from landing_deploy.services.aws_domain_service import AWSDomainService

    mock_r53 = MagicMock()
    mock_r53.change_resource_record_sets.return_value = {"ChangeInfo": {"Id": "/change/C999"}}
    return AWSDomainService(config=make_settings(**overrides), route53_client=mock_r53), mock_r53


class TestEnsureAlias:

    def test_upserts_alias_a_record(self):
        svc, mock_r53 = _make_service()

        result = svc.ensure_alias("promo.example.com", DIST_DOMAIN)

        assert result == {"hosted_zone_id": ZONE_ID, "skipped": False, "change_id": "/change/C999"}
        kwargs = mock_r53.change_resource_record_sets.call_args[1]
        assert kwargs["HostedZoneId"] == ZONE_ID
        change = kwargs["ChangeBatch"]["Changes"][0]
        assert change["Action"] == "UPSERT"
        record = change["ResourceRecordSet"]
        assert record["Name"] == "promo.example.com"
        assert record["Type"] == "A"
        assert record["AliasTarget"] == {
            "HostedZoneId": "Z2FDTNDATAQYW2",
            "DNSName": DIST_DOMAIN,
            "EvaluateTargetHealth": False,
        }

    def test_repeated_calls_upsert_the_same_record(self):
        svc, mock_r53 = _make_service()

        svc.ensure_alias("promo.example.com", DIST_DOMAIN)
        svc.ensure_alias("promo.example.com", DIST_DOMAIN)

        batches = [c[1]["ChangeBatch"] for c in mock_r53.change_resource_record_sets.call_args_list]
        assert batches[0] == batches[1]

    def test_wildcard_covered_subdomain_is_skipped(self):
        svc, mock_r53 = _make_service(wildcard_dns_enabled=True)

        result = svc.ensure_alias(f"summer-sale.{BASE_DOMAIN}", DIST_DOMAIN)

        assert result["skipped"] is True
        mock_r53.change_resource_record_sets.assert_not_called()

    def test_wildcard_skip_needs_no_zone(self):
        svc, mock_r53 = _make_service(wildcard_dns_enabled=True, route53_hosted_zone_id="")

        result = svc.ensure_alias(f"summer-sale.{BASE_DOMAIN}", DIST_DOMAIN)

        assert result["skipped"] is True
        assert result["hosted_zone_id"] is None

    def test_nested_subdomain_is_not_covered_by_wildcard(self):
        svc, mock_r53 = _make_service(wildcard_dns_enabled=True)

        result = svc.ensure_alias(f"a.b.{BASE_DOMAIN}", DIST_DOMAIN)

        assert result["skipped"] is False
        mock_r53.change_resource_record_sets.assert_called_once()

    def test_custom_domain_is_not_covered_by_wildcard(self):
        svc, mock_r53 = _make_service(wildcard_dns_enabled=True)

        svc.ensure_alias("promo.example.com", DIST_DOMAIN)

        mock_r53.change_resource_record_sets.assert_called_once()

    def test_missing_zone_fails_before_network_call(self):
        from landing_deploy.api.exceptions import ConfigurationError

        svc, mock_r53 = _make_service(route53_hosted_zone_id="")

        with pytest.raises(ConfigurationError):
            svc.ensure_alias("promo.example.com", DIST_DOMAIN)
        mock_r53.change_resource_record_sets.assert_not_called()

    def test_provider_error_propagates(self):
        from landing_deploy.api.exceptions import DNSError

        svc, mock_r53 = _make_service()
        mock_r53.change_resource_record_sets.side_effect = _make_client_error()

        with pytest.raises(DNSError, match="InvalidChangeBatch"):
            svc.ensure_alias("promo.example.com", DIST_DOMAIN)
