"""Client factories for the templatespecs extension."""


def cf_template_specs(cli_ctx, *_):
    """Return a ``TemplateSpecsClient`` for the current subscription."""
    from azure.cli.core.commands.client_factory import get_mgmt_service_client
    from azure.cli.core.profiles import ResourceType

    return get_mgmt_service_client(cli_ctx, ResourceType.MGMT_RESOURCE_TEMPLATESPECS)
