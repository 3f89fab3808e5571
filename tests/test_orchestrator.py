"""
Tests for DeploymentOrchestrator.
Runs the real services against in-memory fakes of S3, CloudFront and Route 53.
"""

import pytest
from unittest.mock import patch, MagicMock
from botocore.exceptions import ClientError

from landing_deploy.api.exceptions import (
    DeploymentFailedError,
    DeploymentInProgressError,
    DeploymentNotFoundError,
    PageNotFoundError,
)
from landing_deploy.models.deployment import DeploymentStatus
from landing_deploy.utils.validators import ValidationError

from conftest import BASE_DOMAIN, BUCKET, CERT_ARN, REGION, make_settings


ORIGIN = f"{BUCKET}.s3.{REGION}.amazonaws.com"


def _make_client_error(code: str = "ValidationException") -> ClientError:
    return ClientError(
        {"Error": {"Code": code, "Message": "Mocked AWS error"}},
        "TestOperation",
    )


class FakeAWS:
    """One MagicMock per service; CloudFront remembers what it created."""

    def __init__(self):
        self.distributions = []

        self.s3 = MagicMock()

        self.cloudfront = MagicMock()
        self.cloudfront.list_distributions.side_effect = self._list_distributions
        self.cloudfront.create_distribution.side_effect = self._create_distribution
        self.cloudfront.create_invalidation.return_value = {
            "Invalidation": {"Id": "I2J3K4", "Status": "InProgress"}
        }
        self.cloudfront.get_distribution_config.return_value = {
            "ETag": "ETAG1",
            "DistributionConfig": {"Enabled": True},
        }

        self.route53 = MagicMock()
        self.route53.change_resource_record_sets.return_value = {"ChangeInfo": {"Id": "/change/C1"}}

    def client(self, service, **kwargs):
        return getattr(self, service)

    def add_distribution(self, dist_id, domain, origin=ORIGIN):
        self.distributions.append({
            "Id": dist_id,
            "DomainName": domain,
            "Status": "Deployed",
            "Origins": {"Quantity": 1, "Items": [{"Id": "S3Origin", "DomainName": origin}]},
        })

    def _list_distributions(self, **kwargs):
        return {"DistributionList": {"IsTruncated": False, "Items": list(self.distributions)}}

    def _create_distribution(self, DistributionConfig):
        n = len(self.distributions) + 1
        origin = DistributionConfig["Origins"]["Items"][0]["DomainName"]
        self.add_distribution(f"EDIST{n}", f"d{n}.cloudfront.net", origin)
        return {"Distribution": {"Id": f"EDIST{n}", "DomainName": f"d{n}.cloudfront.net",
                                 "Status": "InProgress"}}


@pytest.fixture()
def aws():
    fake = FakeAWS()
    with patch("boto3.client", side_effect=fake.client):
        yield fake


@pytest.fixture()
def make_orchestrator(aws, store, page_provider):
    from landing_deploy.services.deployment_orchestrator import DeploymentOrchestrator

    def _make(**overrides):
        overrides.setdefault("acm_certificate_arn", CERT_ARN)
        return DeploymentOrchestrator(
            store=store,
            page_provider=page_provider,
            config=make_settings(**overrides),
            form_sender=MagicMock(),
        )

    return _make


# ===========================================================================
# Scenarios
# ===========================================================================

class TestDeployScenarios:

    def test_no_domain_with_wildcard(self, make_orchestrator, aws, page, store):
        """No custom domain or subdomain: stored under the page id, no DNS, CloudFront URL."""
        orch = make_orchestrator(wildcard_dns_enabled=True)

        deployment = orch.deploy(page.id)

        aws.s3.put_object.assert_called_once()
        assert aws.s3.put_object.call_args[1]["Key"] == f"{page.id}/index.html"
        aws.route53.change_resource_record_sets.assert_not_called()
        assert deployment.status == DeploymentStatus.DEPLOYED
        assert deployment.deployed_url == "https://d1.cloudfront.net"
        assert store.get(page.id).status == DeploymentStatus.DEPLOYED

    def test_custom_domain_first_deploy(self, make_orchestrator, aws, page):
        orch = make_orchestrator()

        deployment = orch.deploy(page.id, custom_domain="foo.example.com")

        aws.cloudfront.create_distribution.assert_called_once()
        config_sent = aws.cloudfront.create_distribution.call_args[1]["DistributionConfig"]
        assert config_sent["Aliases"]["Items"] == ["foo.example.com"]
        aws.route53.change_resource_record_sets.assert_called_once()
        assert deployment.deployed_url == "https://foo.example.com"
        assert deployment.use_custom_domain is True

    def test_redeploy_with_existing_distribution(self, make_orchestrator, aws, page):
        aws.add_distribution("EEXIST", "dexist.cloudfront.net")
        orch = make_orchestrator()

        deployment = orch.deploy(page.id, subdomain="summer-sale")

        aws.cloudfront.create_distribution.assert_not_called()
        assert aws.cloudfront.list_distributions.call_count == 1
        aws.route53.change_resource_record_sets.assert_called_once()
        aws.cloudfront.create_invalidation.assert_called_once()
        assert deployment.distribution_id == "EEXIST"
        assert deployment.deployed_url == f"https://summer-sale.{BASE_DOMAIN}"


class TestDeployProperties:

    def test_repeated_deploys_keep_distribution(self, make_orchestrator, aws, page):
        orch = make_orchestrator()

        first = orch.deploy(page.id, custom_domain="foo.example.com")
        second = orch.deploy(page.id, custom_domain="foo.example.com")

        assert first.distribution_id == second.distribution_id
        assert aws.cloudfront.create_distribution.call_count == 1
        assert second.deployment_count == 2

    def test_static_override_skips_provisioning(self, make_orchestrator, aws, page):
        orch = make_orchestrator(
            cloudfront_distribution_id="EWILD",
            cloudfront_distribution_domain="dwild.cloudfront.net",
            wildcard_dns_enabled=True,
        )

        deployment = orch.deploy(page.id, subdomain="summer-sale")

        aws.cloudfront.list_distributions.assert_not_called()
        aws.cloudfront.create_distribution.assert_not_called()
        aws.route53.change_resource_record_sets.assert_not_called()
        assert deployment.distribution_id == "EWILD"
        assert aws.cloudfront.create_invalidation.call_args[1]["DistributionId"] == "EWILD"

    def test_auto_subdomain_from_slug(self, make_orchestrator, aws, page):
        orch = make_orchestrator(auto_subdomain=True, wildcard_dns_enabled=True)

        deployment = orch.deploy(page.id)

        assert deployment.subdomain == "summer-sale"
        assert aws.s3.put_object.call_args[1]["Key"] == "summer-sale/index.html"
        aws.route53.change_resource_record_sets.assert_not_called()
        assert deployment.deployed_url == f"https://summer-sale.{BASE_DOMAIN}"

    def test_auto_subdomain_falls_back_to_id_prefix(self, make_orchestrator, page_provider, page):
        page_provider.pages[page.id] = page.model_copy(update={"slug": None})
        orch = make_orchestrator(auto_subdomain=True, wildcard_dns_enabled=True)

        deployment = orch.deploy(page.id)

        assert deployment.subdomain == page.id[:8]

    def test_page_is_written_back(self, make_orchestrator, page_provider, page):
        orch = make_orchestrator()

        orch.deploy(page.id, custom_domain="foo.example.com")

        (page_id, result), = page_provider.published
        assert page_id == page.id
        assert result.status == "published"
        assert result.url == "https://foo.example.com"
        assert result.distribution_hostname == "d1.cloudfront.net"

    def test_log_trail(self, make_orchestrator, page, store):
        orch = make_orchestrator()

        orch.deploy(page.id)

        messages = [e.message for e in store.get(page.id).logs]
        assert messages[0] == "Deployment started"
        assert messages[1] == "Preparing HTML"
        assert messages[-1] == "Deployment completed successfully"


class TestDeployFailures:

    def test_dns_failure_keeps_partial_progress(self, make_orchestrator, aws, page, store, page_provider):
        aws.route53.change_resource_record_sets.side_effect = _make_client_error("InvalidChangeBatch")
        orch = make_orchestrator()

        with pytest.raises(DeploymentFailedError) as exc_info:
            orch.deploy(page.id, custom_domain="foo.example.com")

        record = store.get(page.id)
        assert record.status == DeploymentStatus.FAILED
        assert record.last_error
        assert "InvalidChangeBatch" in exc_info.value.message
        assert record.distribution_id == "EDIST1"
        assert record.s3_object_key == f"{page.id}/index.html"
        assert record.error_count == 1
        aws.cloudfront.create_invalidation.assert_not_called()
        assert page_provider.published == []

    def test_retry_after_failure_reuses_distribution(self, make_orchestrator, aws, page):
        aws.route53.change_resource_record_sets.side_effect = [
            _make_client_error("Throttling"),
            {"ChangeInfo": {"Id": "/change/C2"}},
        ]
        orch = make_orchestrator()

        with pytest.raises(DeploymentFailedError):
            orch.deploy(page.id, custom_domain="foo.example.com")
        deployment = orch.deploy(page.id, custom_domain="foo.example.com")

        assert deployment.status == DeploymentStatus.DEPLOYED
        assert deployment.last_error is None
        assert (deployment.deployment_count, deployment.error_count) == (1, 1)
        assert aws.cloudfront.create_distribution.call_count == 1

    def test_missing_zone_fails_without_dns_call(self, make_orchestrator, aws, page, store):
        orch = make_orchestrator(route53_hosted_zone_id="")

        with pytest.raises(DeploymentFailedError, match="ROUTE53_HOSTED_ZONE_ID"):
            orch.deploy(page.id, custom_domain="foo.example.com")

        aws.route53.change_resource_record_sets.assert_not_called()
        assert store.get(page.id).distribution_id == "EDIST1"

    def test_storage_failure_aborts_pipeline(self, make_orchestrator, aws, page, store):
        aws.s3.put_object.side_effect = _make_client_error("AccessDenied")
        orch = make_orchestrator()

        with pytest.raises(DeploymentFailedError):
            orch.deploy(page.id)

        aws.cloudfront.list_distributions.assert_not_called()
        assert store.get(page.id).status == DeploymentStatus.FAILED

    def test_invalidation_failure_marks_failed(self, make_orchestrator, aws, page, store):
        aws.cloudfront.create_invalidation.side_effect = _make_client_error("TooManyInvalidationsInProgress")
        orch = make_orchestrator()

        with pytest.raises(DeploymentFailedError):
            orch.deploy(page.id)

        assert store.get(page.id).status == DeploymentStatus.FAILED

    def test_unknown_page_touches_nothing(self, make_orchestrator, aws, store):
        orch = make_orchestrator()

        with pytest.raises(PageNotFoundError):
            orch.deploy("missing")

        assert store.get("missing") is None
        aws.s3.put_object.assert_not_called()

    def test_invalid_custom_domain_rejected_up_front(self, make_orchestrator, aws, page, store):
        orch = make_orchestrator()

        with pytest.raises(ValidationError):
            orch.deploy(page.id, custom_domain="not a domain")

        assert store.get(page.id) is None

    def test_concurrent_deploy_is_rejected(self, make_orchestrator, aws, page, store):
        orch = make_orchestrator()

        with orch.locks.hold(page.id):
            with pytest.raises(DeploymentInProgressError):
                orch.deploy(page.id)

        assert store.get(page.id) is None
        assert orch.deploy(page.id).status == DeploymentStatus.DEPLOYED


# ===========================================================================
# Other operations
# ===========================================================================

class TestInfoAndInvalidate:

    def test_get_info_returns_last_20_logs(self, make_orchestrator, page, store):
        orch = make_orchestrator()
        orch.deploy(page.id)
        record = store.get(page.id)
        for i in range(40):
            record.add_log(f"extra {i}")
        store.save(record)

        info = orch.get_info(page.id)

        assert len(info.logs) == 20
        assert info.logs[-1].message == "extra 39"
        assert len(store.get(page.id).logs) > 20

    def test_get_info_missing(self, make_orchestrator):
        with pytest.raises(DeploymentNotFoundError):
            make_orchestrator().get_info("missing")

    def test_invalidate_reruns_cache_step(self, make_orchestrator, aws, page, store):
        orch = make_orchestrator()
        orch.deploy(page.id)
        aws.cloudfront.create_invalidation.reset_mock()

        result = orch.invalidate(page.id)

        assert result == {"invalidation_id": "I2J3K4", "status": "InProgress"}
        aws.cloudfront.create_invalidation.assert_called_once()
        assert store.get(page.id).logs[-1].message == "Cache invalidated manually"

    def test_invalidate_without_distribution(self, make_orchestrator, aws, page, store):
        aws.s3.put_object.side_effect = _make_client_error("AccessDenied")
        orch = make_orchestrator()
        with pytest.raises(DeploymentFailedError):
            orch.deploy(page.id)

        with pytest.raises(DeploymentNotFoundError):
            orch.invalidate(page.id)


class TestDelete:

    def test_enabled_distribution_is_disabled_first(self, make_orchestrator, aws, page, store):
        orch = make_orchestrator()
        orch.deploy(page.id)

        calls = []
        aws.cloudfront.update_distribution.side_effect = (
            lambda **kw: calls.append(store.get(page.id) is not None)
        )
        orch.delete(page.id)

        aws.cloudfront.update_distribution.assert_called_once()
        kwargs = aws.cloudfront.update_distribution.call_args[1]
        assert kwargs["DistributionConfig"]["Enabled"] is False
        assert kwargs["IfMatch"] == "ETAG1"
        assert calls == [True]
        assert store.get(page.id) is None

    def test_no_distribution_means_no_cloudfront_call(self, make_orchestrator, aws, page, store):
        aws.s3.put_object.side_effect = _make_client_error("AccessDenied")
        orch = make_orchestrator()
        with pytest.raises(DeploymentFailedError):
            orch.deploy(page.id)

        orch.delete(page.id)

        aws.cloudfront.get_distribution_config.assert_not_called()
        aws.cloudfront.update_distribution.assert_not_called()
        assert store.get(page.id) is None

    def test_disable_failure_still_deletes(self, make_orchestrator, aws, page, store):
        orch = make_orchestrator()
        orch.deploy(page.id)
        aws.cloudfront.get_distribution_config.side_effect = _make_client_error("AccessDenied")

        orch.delete(page.id)

        assert store.get(page.id) is None

    def test_storage_and_dns_are_left_alone(self, make_orchestrator, aws, page):
        orch = make_orchestrator()
        orch.deploy(page.id, custom_domain="foo.example.com")

        orch.delete(page.id)

        aws.s3.delete_object.assert_not_called()
        assert aws.route53.change_resource_record_sets.call_count == 1

    def test_delete_missing(self, make_orchestrator):
        with pytest.raises(DeploymentNotFoundError):
            make_orchestrator().delete("missing")


class TestTestForm:

    def test_sends_on_behalf_of_deployed_page(self, make_orchestrator, page, store):
        orch = make_orchestrator()
        orch.deploy(page.id)
        orch.form_sender.submit_test.return_value = {
            "success": True, "status_code": 200, "payload": {"form_id": "test-form"},
        }

        result = orch.test_form(page.id, form_data={"name": "A"})

        orch.form_sender.submit_test.assert_called_once_with(
            page_id=page.id,
            page_url="https://d1.cloudfront.net",
            form_id="test-form",
            form_data={"name": "A"},
        )
        assert result["success"] is True
        assert "Test form submitted" in store.get(page.id).logs[-1].message

    def test_requires_deployment(self, make_orchestrator):
        with pytest.raises(DeploymentNotFoundError):
            make_orchestrator().test_form("missing")

    def test_failed_deployment_is_not_submitted(self, make_orchestrator, aws, page, store):
        aws.s3.put_object.side_effect = _make_client_error("AccessDenied")
        orch = make_orchestrator()
        with pytest.raises(DeploymentFailedError):
            orch.deploy(page.id)
        assert store.get(page.id).status == DeploymentStatus.FAILED

        with pytest.raises(DeploymentNotFoundError, match="No active deployment"):
            orch.test_form(page.id)

        orch.form_sender.submit_test.assert_not_called()

    def test_not_submitted_while_page_is_busy(self, make_orchestrator, page, store):
        orch = make_orchestrator()
        orch.deploy(page.id)

        with orch.locks.hold(page.id):
            with pytest.raises(DeploymentInProgressError):
                orch.test_form(page.id)

        orch.form_sender.submit_test.assert_not_called()
        assert store.get(page.id).logs[-1].message == "Deployment completed successfully"
