"""Help text for the templatespecs extension."""

from knack.help_files import helps

helps["ts resolve"] = """
type: command
short-summary: Look up a template spec or template spec version by name.
long-summary: |
    With --built-in the tenant's built-in template specs are searched;
    otherwise the template spec must exist in --resource-group.

    Tab completion for --name and --version follows the same switch: when
    --built-in is already on the command line, built-in names are suggested.
examples:
    - name: Show a built-in template spec
      text: az ts resolve --built-in --name AzureKubernetesService
    - name: Show a version of a template spec in a resource group
      text: az ts resolve -g MyResourceGroup --name MyTemplateSpec --version 1.0
"""

helps["ts built-in"] = """
type: group
short-summary: Browse the built-in template specs available to your tenant.
"""

helps["ts built-in list"] = """
type: command
short-summary: List built-in template spec names.
long-summary: |
    The listing is bounded by --timeout (default 3 seconds). When the service
    is slower than that, the names collected so far are returned together with
    a warning. Use --strict to fail instead.
examples:
    - name: List all built-in template specs
      text: az ts built-in list
    - name: List built-ins starting with "Azure", allowing up to 10 seconds
      text: az ts built-in list --prefix Azure --timeout 10
"""

helps["ts built-in show"] = """
type: command
short-summary: Show a built-in template spec.
examples:
    - name: Show a built-in template spec
      text: az ts built-in show --name AzureKubernetesService
"""

helps["ts built-in version"] = """
type: group
short-summary: Browse the versions of a built-in template spec.
"""

helps["ts built-in version list"] = """
type: command
short-summary: List the versions of a built-in template spec.
examples:
    - name: List versions of a built-in template spec
      text: az ts built-in version list --name AzureKubernetesService
"""

helps["ts built-in version show"] = """
type: command
short-summary: Show one version of a built-in template spec.
examples:
    - name: Show a built-in template spec version
      text: az ts built-in version show --name AzureKubernetesService --version 1.0
"""

helps["ts completion"] = """
type: group
short-summary: Inspect and configure template spec tab completion.
"""

helps["ts completion run"] = """
type: command
short-summary: Run template spec completion outside the shell and print the suggestions.
long-summary: |
    Useful for diagnosing slow or empty completions. Pass --strict to surface
    timeouts and service errors that tab completion normally hides.
examples:
    - name: Complete built-in names starting with "Az"
      text: az ts completion run --built-in --prefix Az
    - name: Complete versions of a template spec in a resource group
      text: az ts completion run --target version -g MyResourceGroup --name MyTemplateSpec
"""

helps["ts completion config"] = """
type: group
short-summary: Manage completion settings stored in templatespecs.yaml.
"""

helps["ts completion config show"] = """
type: command
short-summary: Show the effective completion settings.
"""

helps["ts completion config set"] = """
type: command
short-summary: Change a completion setting.
examples:
    - name: Raise the built-in listing deadline to 5 seconds
      text: az ts completion config set --key timeout_seconds --value 5
    - name: Make completion fail loudly on timeouts
      text: az ts completion config set --key strict_mode --value true
"""
