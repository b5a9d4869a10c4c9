"""Kubernetes resource catalog."""

from __future__ import annotations

from terradocs.models.registry import CatalogEntry, ProviderSpec

SPEC = ProviderSpec(name="kubernetes", display_name="Kubernetes", prefix="kubernetes")

CATALOG: tuple[CatalogEntry, ...] = tuple(
    CatalogEntry(kind=kind, name=name, category=category, description=description)
    for kind, name, category, description in [
        ("resource", "kubernetes_namespace", "Core", "Manages a Kubernetes Namespace"),
        ("resource", "kubernetes_pod", "Workloads", "Manages a Kubernetes Pod"),
        ("resource", "kubernetes_deployment", "Workloads", "Manages a Kubernetes Deployment"),
        ("resource", "kubernetes_service", "Services", "Manages a Kubernetes Service"),
        ("resource", "kubernetes_config_map", "Config", "Manages a Kubernetes ConfigMap"),
        ("resource", "kubernetes_secret", "Config", "Manages a Kubernetes Secret"),
        (
            "resource",
            "kubernetes_persistent_volume",
            "Storage",
            "Manages a Kubernetes PersistentVolume",
        ),
        (
            "resource",
            "kubernetes_persistent_volume_claim",
            "Storage",
            "Manages a Kubernetes PersistentVolumeClaim",
        ),
        ("resource", "kubernetes_ingress", "Networking", "Manages a Kubernetes Ingress"),
        (
            "resource",
            "kubernetes_network_policy",
            "Networking",
            "Manages a Kubernetes NetworkPolicy",
        ),
        ("resource", "kubernetes_service_account", "Auth", "Manages a Kubernetes ServiceAccount"),
        ("resource", "kubernetes_role", "Auth", "Manages a Kubernetes Role"),
        ("resource", "kubernetes_role_binding", "Auth", "Manages a Kubernetes RoleBinding"),
        ("resource", "kubernetes_cluster_role", "Auth", "Manages a Kubernetes ClusterRole"),
        (
            "resource",
            "kubernetes_cluster_role_binding",
            "Auth",
            "Manages a Kubernetes ClusterRoleBinding",
        ),
        ("data_source", "kubernetes_namespace", "Core", "Data source for Kubernetes Namespace"),
        ("data_source", "kubernetes_service", "Services", "Data source for Kubernetes Service"),
        ("data_source", "kubernetes_config_map", "Config", "Data source for Kubernetes ConfigMap"),
        ("data_source", "kubernetes_secret", "Config", "Data source for Kubernetes Secret"),
        (
            "data_source",
            "kubernetes_persistent_volume_claim",
            "Storage",
            "Data source for Kubernetes PersistentVolumeClaim",
        ),
        (
            "data_source",
            "kubernetes_service_account",
            "Auth",
            "Data source for Kubernetes ServiceAccount",
        ),
    ]
)
