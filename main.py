"""
Main CLI Entry Point
Operator command-line interface for page deployments:
- Deploy / redeploy a page to S3 + CloudFront (+ Route 53)
- Inspect, invalidate and delete deployments
- Run the HTTP API
- Print the CloudFront routing function
"""

import sys
import argparse

from landing_deploy.db.store import DeploymentStore
from landing_deploy.edge import render_viewer_request_function
from landing_deploy.services import DeploymentOrchestrator
from landing_deploy.utils.logger import get_logger
from landing_deploy.utils.config import get_settings

logger = get_logger(__name__)


def _build_orchestrator() -> DeploymentOrchestrator:
    settings = get_settings()
    store = DeploymentStore(settings.database_url)
    store.init_schema()
    return DeploymentOrchestrator(store=store, config=settings)


def cmd_deploy(args):
    """Deploy a page"""
    logger.info(f"Deploying page: {args.page_id}")

    try:
        orchestrator = _build_orchestrator()
        deployment = orchestrator.deploy(
            args.page_id,
            custom_domain=args.custom_domain,
            subdomain=args.subdomain,
        )

        print(f"\n{'='*60}")
        print(f" DEPLOYMENT COMPLETED")
        print(f"{'='*60}")
        print(f"  Page:          {deployment.page_id}")
        print(f"  URL:           {deployment.deployed_url}")
        print(f"  Distribution:  {deployment.distribution_id} ({deployment.distribution_hostname})")
        print(f"  Object:        s3://{deployment.s3_bucket}/{deployment.s3_object_key}")
        print(f"  Build:         {deployment.build_size} bytes in {deployment.build_time} ms")
        print(f"{'='*60}\n")

    except Exception as e:
        logger.error(f"❌ Deployment failed: {str(e)}")
        sys.exit(1)


def cmd_info(args):
    """Show a deployment record"""
    try:
        orchestrator = _build_orchestrator()
        deployment = orchestrator.get_info(args.page_id)

        print(f"\n{'='*60}")
        print(f" DEPLOYMENT: {deployment.page_id}")
        print(f"{'='*60}")
        print(f"  Status:        {deployment.status.value}")
        print(f"  URL:           {deployment.deployed_url or 'N/A'}")
        print(f"  Distribution:  {deployment.distribution_id or 'N/A'}")
        print(f"  Custom domain: {deployment.custom_domain or '-'}")
        print(f"  Subdomain:     {deployment.subdomain or '-'}")
        print(f"  Last deployed: {deployment.last_deployed or 'never'}")
        print(f"  Deployments:   {deployment.deployment_count}  (errors: {deployment.error_count})")
        if deployment.last_error:
            print(f"  Last error:    {deployment.last_error}")
        print(f"{'-'*60}")
        for entry in deployment.logs:
            print(f"  {entry.timestamp:%Y-%m-%d %H:%M:%S} [{entry.level.value:<7}] {entry.message}")
        print(f"{'='*60}\n")

    except Exception as e:
        logger.error(f"❌ Failed to get deployment info: {str(e)}")
        sys.exit(1)


def cmd_invalidate(args):
    """Invalidate a page's CloudFront cache"""
    logger.info(f"Invalidating cache for page: {args.page_id}")

    try:
        orchestrator = _build_orchestrator()
        result = orchestrator.invalidate(args.page_id)

        print(f"\n{'='*60}")
        print(f" CACHE INVALIDATION REQUESTED")
        print(f"{'='*60}")
        print(f"  ID:          {result['invalidation_id']}")
        print(f"  Status:      {result['status']}")
        print(f"{'='*60}\n")

    except Exception as e:
        logger.error(f"❌ Failed to invalidate cache: {str(e)}")
        sys.exit(1)


def cmd_delete(args):
    """Delete a deployment record (disables its distribution)"""
    logger.info(f"Deleting deployment for page: {args.page_id}")

    try:
        orchestrator = _build_orchestrator()
        orchestrator.delete(args.page_id)
        logger.info(f"✅ Deployment for {args.page_id} deleted")

    except Exception as e:
        logger.error(f"❌ Failed to delete deployment: {str(e)}")
        sys.exit(1)


def cmd_serve(args):
    """Run the HTTP API"""
    from landing_deploy.server.app import main as serve

    serve(host=args.host, port=args.port)


def cmd_edge_function(args):
    """Print the CloudFront viewer-request function"""
    base_domain = args.base_domain or get_settings().base_domain
    if not base_domain:
        logger.error("❌ No base domain: pass --base-domain or set ROUTE53_BASE_DOMAIN")
        sys.exit(1)

    try:
        print(render_viewer_request_function(base_domain), end="")
    except ValueError as e:
        logger.error(f"❌ {str(e)}")
        sys.exit(1)


def main():
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Landing Page Deployment CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Deploy a page on its CloudFront hostname
  python main.py deploy 65f1c0ffee

  # Deploy on a custom domain
  python main.py deploy 65f1c0ffee --custom-domain promo.example.com

  # Deploy on a subdomain of ROUTE53_BASE_DOMAIN
  python main.py deploy 65f1c0ffee --subdomain summer-sale

  # Inspect / invalidate / delete
  python main.py info 65f1c0ffee
  python main.py invalidate 65f1c0ffee
  python main.py delete 65f1c0ffee

  # Run the HTTP API
  python main.py serve --port 8000

  # Print the routing function for the wildcard distribution
  python main.py edge-function --base-domain landinghub.app
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ==================== DEPLOY COMMAND ====================
    deploy_parser = subparsers.add_parser("deploy", help="Deploy (or redeploy) a page")
    deploy_parser.add_argument("page_id", help="Page ID")
    deploy_parser.add_argument("--custom-domain", help="Fully qualified hostname, e.g. promo.example.com")
    deploy_parser.add_argument("--subdomain", help="Label under ROUTE53_BASE_DOMAIN")
    deploy_parser.set_defaults(func=cmd_deploy)

    # ==================== RECORD COMMANDS ====================
    info_parser = subparsers.add_parser("info", help="Show deployment status and recent logs")
    info_parser.add_argument("page_id", help="Page ID")
    info_parser.set_defaults(func=cmd_info)

    invalidate_parser = subparsers.add_parser("invalidate", help="Invalidate CloudFront cache (/*)")
    invalidate_parser.add_argument("page_id", help="Page ID")
    invalidate_parser.set_defaults(func=cmd_invalidate)

    delete_parser = subparsers.add_parser("delete", help="Disable distribution and delete the record")
    delete_parser.add_argument("page_id", help="Page ID")
    delete_parser.set_defaults(func=cmd_delete)

    # ==================== SERVER ====================
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address (default: API_HOST)")
    serve_parser.add_argument("--port", type=int, help="Port (default: API_PORT)")
    serve_parser.set_defaults(func=cmd_serve)

    # ==================== EDGE FUNCTION ====================
    edge_parser = subparsers.add_parser("edge-function", help="Print the CloudFront routing function")
    edge_parser.add_argument("--base-domain", help="Base domain (default: ROUTE53_BASE_DOMAIN)")
    edge_parser.set_defaults(func=cmd_edge_function)

    # Parse and execute
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
