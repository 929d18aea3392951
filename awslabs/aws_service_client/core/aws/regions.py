# These global services don't have regionalized endpoints
NON_REGIONALIZED_SERVICES = ('iam', 'route53')

# These global services have fixed regionalized endpoints
GLOBAL_SERVICE_REGIONS = {
    'devicefarm': 'us-west-2',
    'ecr-public': 'us-east-1',
    'globalaccelerator': 'us-west-2',
    'marketplace-catalog': 'us-east-1',
    'route53-recovery-control-config': 'us-west-2',
    'route53-recovery-readiness': 'us-west-2',
    'route53domains': 'us-east-1',
    'sagemaker-geospatial': 'us-west-2',
}

ENDPOINT_TEMPLATE = 'https://{prefix}.{region}.amazonaws.com'
GLOBAL_ENDPOINT_TEMPLATE = 'https://{prefix}.amazonaws.com'


def resolve_region(service_name: str, region: str | None) -> str | None:
    """Return the region requests for the service must be sent to."""
    return GLOBAL_SERVICE_REGIONS.get(service_name, region)


def resolve_endpoint(endpoint_prefix: str, region: str) -> str:
    """Build the default endpoint URL of a service in a region."""
    if endpoint_prefix in NON_REGIONALIZED_SERVICES:
        return GLOBAL_ENDPOINT_TEMPLATE.format(prefix=endpoint_prefix)
    return ENDPOINT_TEMPLATE.format(prefix=endpoint_prefix, region=region)
