"""Google Cloud Platform resource catalog."""

from __future__ import annotations

from terradocs.models.registry import CatalogEntry, ProviderSpec

SPEC = ProviderSpec(name="google", display_name="Google Cloud Platform", prefix="google")

CATALOG: tuple[CatalogEntry, ...] = tuple(
    CatalogEntry(kind=kind, name=name, category=category, description=description)
    for kind, name, category, description in [
        ("resource", "google_compute_instance", "Compute", "Manages a Compute Engine instance"),
        ("resource", "google_compute_disk", "Compute", "Manages a persistent disk"),
        ("resource", "google_compute_network", "Compute", "Manages a VPC network"),
        ("resource", "google_compute_subnetwork", "Compute", "Manages a subnetwork"),
        ("resource", "google_compute_firewall", "Compute", "Manages a firewall rule"),
        ("resource", "google_compute_instance_group", "Compute", "Manages an Instance Group"),
        (
            "resource",
            "google_storage_bucket",
            "Storage",
            "Creates a new bucket in Google Cloud Storage",
        ),
        (
            "resource",
            "google_storage_bucket_object",
            "Storage",
            "Creates a new object inside a bucket",
        ),
        (
            "resource",
            "google_container_cluster",
            "Container",
            "Manages a Google Kubernetes Engine cluster",
        ),
        ("resource", "google_container_node_pool", "Container", "Manages a node pool in GKE"),
        ("resource", "google_sql_database_instance", "SQL", "Creates a new Cloud SQL instance"),
        ("resource", "google_sql_database", "SQL", "Creates a new database in Cloud SQL instance"),
        ("resource", "google_sql_user", "SQL", "Creates a new user in Cloud SQL instance"),
        ("resource", "google_service_account", "IAM", "Creates and manages service accounts"),
        ("resource", "google_project_iam_binding", "IAM", "Manages IAM bindings on projects"),
        ("resource", "google_project_iam_member", "IAM", "Manages IAM members on projects"),
        (
            "resource",
            "google_cloudfunctions_function",
            "Functions",
            "Creates a new Cloud Function",
        ),
        (
            "resource",
            "google_cloudfunctions2_function",
            "Functions",
            "Creates a new Cloud Function (2nd gen)",
        ),
        ("data_source", "google_project", "Core", "Gets information about a project"),
        (
            "data_source",
            "google_client_config",
            "Core",
            "Gets information about the current client configuration",
        ),
        ("data_source", "google_compute_zones", "Compute", "Gets available zones in a region"),
        (
            "data_source",
            "google_compute_image",
            "Compute",
            "Gets information about a compute image",
        ),
        (
            "data_source",
            "google_storage_bucket",
            "Storage",
            "Gets information about a storage bucket",
        ),
    ]
)
