"""Route table: local endpoints and the 20i endpoints they forward to.

Local paths use Starlette ``{param}`` templates; upstream templates are
filled from the same parameters.
"""

from __future__ import annotations

from urllib.parse import quote

from .errors import ValidationError
from .models import HttpMethod, RouteSpec

GET = HttpMethod.GET
POST = HttpMethod.POST
DELETE = HttpMethod.DELETE


def _route(name, method, local_path, upstream_path, required_fields=(), requires_auth=True) -> RouteSpec:
    return RouteSpec(
        name=name,
        method=method,
        local_path=local_path,
        upstream_path=upstream_path,
        required_fields=tuple(required_fields),
        requires_auth=requires_auth,
    )


ROUTES: tuple[RouteSpec, ...] = (
    # Domains
    _route("list_domains", GET, "/domains", "/domain"),
    _route("get_domain", GET, "/domain/{domain}", "/domain/{domain}"),
    _route("get_domain_dns", GET, "/domain/{domain}/dns", "/domain/{domain}/dns"),
    _route("update_domain_dns", POST, "/domain/{domain}/dns", "/domain/{domain}/dns"),
    _route("get_domain_nameservers", GET, "/domain/{domain}/nameservers", "/domain/{domain}/nameservers"),
    _route("update_domain_nameservers", POST, "/domain/{domain}/nameservers", "/domain/{domain}/nameservers"),
    # Legacy paths served by the first Express revision
    _route("legacy_list_domains", GET, "/20i/domains", "/domain"),
    _route("legacy_list_packages", GET, "/20i/packages", "/package"),
    _route("legacy_get_domain", GET, "/20i/domain/{domain}", "/domain/{domain}"),
    # Hosting packages
    _route("list_packages", GET, "/packages", "/package"),
    _route("create_package", POST, "/packages", "/package", required_fields=("type", "domain_name")),
    _route("get_package", GET, "/package/{id}", "/package/{id}"),
    _route("delete_package", DELETE, "/package/{id}", "/package/{id}"),
    _route("get_package_web", GET, "/package/{id}/web", "/package/{id}/web"),
    _route("get_package_limits", GET, "/package/{id}/limits", "/package/{id}/limits"),
    # Databases
    _route("list_databases", GET, "/package/{id}/database", "/package/{id}/database"),
    _route("create_database", POST, "/package/{id}/database", "/package/{id}/database", required_fields=("name",)),
    _route("delete_database", DELETE, "/package/{id}/database/{database_id}", "/package/{id}/database/{database_id}"),
    # Email
    _route("list_email_accounts", GET, "/package/{id}/email", "/package/{id}/email"),
    _route(
        "create_email_account", POST, "/package/{id}/email", "/package/{id}/email",
        required_fields=("local_part", "password"),
    ),
    _route("delete_email_account", DELETE, "/package/{id}/email/{account}", "/package/{id}/email/{account}"),
    # WordPress
    _route("get_wordpress_settings", GET, "/package/{id}/wordpress", "/package/{id}/wordpress"),
    _route("update_wordpress_settings", POST, "/package/{id}/wordpress", "/package/{id}/wordpress"),
    # CDN
    _route("get_cdn_features", GET, "/package/{id}/cdn", "/package/{id}/cdn"),
    _route("update_cdn_features", POST, "/package/{id}/cdn", "/package/{id}/cdn"),
    _route("purge_cdn_cache", POST, "/package/{id}/cdn/purge", "/package/{id}/cdn/purge"),
    # VPS
    _route("list_vps", GET, "/vps", "/vps"),
    _route("get_vps", GET, "/vps/{id}", "/vps/{id}"),
    _route("reboot_vps", POST, "/vps/{id}/reboot", "/vps/{id}/reboot"),
)


def fill_upstream_path(route: RouteSpec, path_params: dict[str, str]) -> str:
    """Substitute URL-quoted path parameters into the route's upstream template."""
    quoted = {}
    for key, value in path_params.items():
        value = str(value).strip()
        if not value:
            raise ValidationError(f"Path parameter '{key}' must not be blank")
        quoted[key] = quote(value, safe="")
    try:
        return route.upstream_path.format(**quoted)
    except KeyError as exc:
        raise ValidationError(f"Missing path parameter {exc.args[0]!r} for {route.name}") from None


def find_route(name: str) -> RouteSpec:
    for route in ROUTES:
        if route.name == name:
            return route
    raise KeyError(name)
