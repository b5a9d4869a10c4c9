"""Microsoft Azure resource catalog."""

from __future__ import annotations

from terradocs.models.registry import CatalogEntry, ProviderSpec

SPEC = ProviderSpec(name="azurerm", display_name="Microsoft Azure", prefix="azurerm")

CATALOG: tuple[CatalogEntry, ...] = tuple(
    CatalogEntry(kind=kind, name=name, category=category, description=description)
    for kind, name, category, description in [
        ("resource", "azurerm_virtual_machine", "Compute", "Manages a Virtual Machine"),
        (
            "resource",
            "azurerm_linux_virtual_machine",
            "Compute",
            "Manages a Linux Virtual Machine",
        ),
        (
            "resource",
            "azurerm_windows_virtual_machine",
            "Compute",
            "Manages a Windows Virtual Machine",
        ),
        (
            "resource",
            "azurerm_virtual_machine_scale_set",
            "Compute",
            "Manages a Virtual Machine Scale Set",
        ),
        ("resource", "azurerm_storage_account", "Storage", "Manages a Storage Account"),
        ("resource", "azurerm_storage_container", "Storage", "Manages a Storage Container"),
        ("resource", "azurerm_storage_blob", "Storage", "Manages a Storage Blob"),
        ("resource", "azurerm_virtual_network", "Network", "Manages a Virtual Network"),
        ("resource", "azurerm_subnet", "Network", "Manages a Subnet"),
        (
            "resource",
            "azurerm_network_security_group",
            "Network",
            "Manages a Network Security Group",
        ),
        ("resource", "azurerm_public_ip", "Network", "Manages a Public IP"),
        ("resource", "azurerm_load_balancer", "Network", "Manages a Load Balancer"),
        ("resource", "azurerm_mssql_server", "Database", "Manages a Microsoft SQL Server"),
        ("resource", "azurerm_mssql_database", "Database", "Manages a Microsoft SQL Database"),
        ("resource", "azurerm_cosmosdb_account", "Database", "Manages a CosmosDB Account"),
        ("resource", "azurerm_app_service_plan", "App Service", "Manages an App Service Plan"),
        ("resource", "azurerm_app_service", "App Service", "Manages an App Service"),
        ("resource", "azurerm_function_app", "App Service", "Manages a Function App"),
        (
            "data_source",
            "azurerm_client_config",
            "Core",
            "Gets information about the current client configuration",
        ),
        (
            "data_source",
            "azurerm_subscription",
            "Core",
            "Gets information about the current subscription",
        ),
        (
            "data_source",
            "azurerm_resource_group",
            "Core",
            "Gets information about a Resource Group",
        ),
        (
            "data_source",
            "azurerm_virtual_network",
            "Network",
            "Gets information about a Virtual Network",
        ),
        ("data_source", "azurerm_subnet", "Network", "Gets information about a Subnet"),
    ]
)
