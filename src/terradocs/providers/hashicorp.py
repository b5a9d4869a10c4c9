"""Catalogs for HashiCorp's own product providers: Vault, Consul and Nomad.

Each product is a separate registry provider with its own repository and
release tags, so each gets its own spec.
"""

from __future__ import annotations

from terradocs.models.registry import CatalogEntry, ProviderSpec


def _catalog(rows: list[tuple[str, str, str, str]]) -> tuple[CatalogEntry, ...]:
    return tuple(
        CatalogEntry(kind=kind, name=name, category=category, description=description)
        for kind, name, category, description in rows
    )


VAULT = ProviderSpec(name="vault", display_name="HashiCorp Vault", prefix="vault")

VAULT_CATALOG = _catalog(
    [
        ("resource", "vault_auth_backend", "Auth", "Manages a Vault auth backend"),
        ("resource", "vault_generic_secret", "Secrets", "Manages a generic secret in Vault"),
        ("resource", "vault_policy", "Policies", "Manages a Vault policy"),
        ("resource", "vault_mount", "Mounts", "Manages a Vault mount"),
        (
            "resource",
            "vault_database_secret_backend_connection",
            "Database",
            "Manages a database connection in Vault",
        ),
        (
            "resource",
            "vault_database_secret_backend_role",
            "Database",
            "Manages a database role in Vault",
        ),
        ("resource", "vault_pki_secret_backend_root_cert", "PKI", "Manages a PKI root certificate"),
        ("resource", "vault_token", "Auth", "Manages a Vault token"),
        ("resource", "vault_namespace", "Enterprise", "Manages a Vault namespace"),
        ("data_source", "vault_generic_secret", "Secrets", "Reads a generic secret from Vault"),
        ("data_source", "vault_policy_document", "Policies", "Generates a Vault policy document"),
    ]
)

CONSUL = ProviderSpec(name="consul", display_name="HashiCorp Consul", prefix="consul")

CONSUL_CATALOG = _catalog(
    [
        ("resource", "consul_service", "Services", "Manages a Consul service"),
        ("resource", "consul_node", "Nodes", "Manages a Consul node"),
        ("resource", "consul_key_prefix", "KV", "Manages a set of keys in Consul's KV store"),
        ("resource", "consul_keys", "KV", "Manages individual keys in Consul's KV store"),
        (
            "resource",
            "consul_agent_service",
            "Services",
            "Manages a service on the local Consul agent",
        ),
        ("resource", "consul_intention", "Connect", "Manages a Consul Connect intention"),
        ("resource", "consul_config_entry", "Config", "Manages a Consul configuration entry"),
        ("resource", "consul_acl_policy", "ACL", "Manages a Consul ACL policy"),
        ("resource", "consul_acl_token", "ACL", "Manages a Consul ACL token"),
        ("resource", "consul_namespace", "Enterprise", "Manages a Consul namespace"),
        ("data_source", "consul_services", "Services", "Gets information about services in Consul"),
        ("data_source", "consul_nodes", "Nodes", "Gets information about nodes in Consul"),
        ("data_source", "consul_keys", "KV", "Reads keys from Consul's KV store"),
        ("data_source", "consul_service", "Services", "Gets information about a Consul service"),
    ]
)

NOMAD = ProviderSpec(name="nomad", display_name="HashiCorp Nomad", prefix="nomad")

NOMAD_CATALOG = _catalog(
    [
        ("resource", "nomad_job", "Jobs", "Manages a Nomad job"),
        ("resource", "nomad_namespace", "Namespaces", "Manages a Nomad namespace"),
        ("resource", "nomad_sentinel_policy", "Policies", "Manages a Nomad Sentinel policy"),
        ("resource", "nomad_acl_policy", "ACL", "Manages a Nomad ACL policy"),
        ("resource", "nomad_acl_token", "ACL", "Manages a Nomad ACL token"),
        (
            "resource",
            "nomad_quota_specification",
            "Quotas",
            "Manages a Nomad quota specification",
        ),
        ("resource", "nomad_csi_volume", "Storage", "Manages a Nomad CSI volume"),
        ("resource", "nomad_external_volume", "Storage", "Manages a Nomad external volume"),
        ("resource", "nomad_variable", "Variables", "Manages a Nomad variable"),
        ("data_source", "nomad_deployments", "Jobs", "Gets information about Nomad deployments"),
        ("data_source", "nomad_job", "Jobs", "Gets information about a Nomad job"),
        (
            "data_source",
            "nomad_namespaces",
            "Namespaces",
            "Gets information about Nomad namespaces",
        ),
        ("data_source", "nomad_regions", "Cluster", "Gets information about Nomad regions"),
    ]
)

PROVIDERS: tuple[tuple[ProviderSpec, tuple[CatalogEntry, ...]], ...] = (
    (VAULT, VAULT_CATALOG),
    (CONSUL, CONSUL_CATALOG),
    (NOMAD, NOMAD_CATALOG),
)
