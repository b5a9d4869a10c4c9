"""Amazon Web Services resource catalog."""

from __future__ import annotations

from terradocs.models.registry import CatalogEntry, ProviderSpec

SPEC = ProviderSpec(name="aws", display_name="Amazon Web Services", prefix="aws")

CATALOG: tuple[CatalogEntry, ...] = tuple(
    CatalogEntry(kind=kind, name=name, category=category, description=description)
    for kind, name, category, description in [
        ("resource", "aws_instance", "EC2", "Provides an EC2 instance resource"),
        ("resource", "aws_launch_template", "EC2", "Provides an EC2 Launch Template resource"),
        ("resource", "aws_autoscaling_group", "EC2", "Provides an Auto Scaling Group resource"),
        ("resource", "aws_key_pair", "EC2", "Provides an EC2 key pair resource"),
        ("resource", "aws_security_group", "EC2", "Provides a security group resource"),
        ("resource", "aws_security_group_rule", "EC2", "Provides a security group rule resource"),
        ("resource", "aws_s3_bucket", "S3", "Provides a S3 bucket resource"),
        ("resource", "aws_s3_bucket_policy", "S3", "Attaches a policy to an S3 bucket resource"),
        (
            "resource",
            "aws_s3_bucket_versioning",
            "S3",
            "Provides an S3 bucket versioning resource",
        ),
        ("resource", "aws_s3_object", "S3", "Provides a S3 bucket object resource"),
        ("resource", "aws_ebs_volume", "EC2", "Manages a single EBS volume"),
        ("resource", "aws_volume_attachment", "EC2", "Provides an AWS EBS Volume Attachment"),
        ("resource", "aws_db_instance", "RDS", "Provides an RDS instance resource"),
        ("resource", "aws_db_subnet_group", "RDS", "Provides an RDS DB subnet group resource"),
        (
            "resource",
            "aws_db_parameter_group",
            "RDS",
            "Provides an RDS DB parameter group resource",
        ),
        ("resource", "aws_dynamodb_table", "DynamoDB", "Provides a DynamoDB table resource"),
        ("resource", "aws_vpc", "VPC", "Provides a VPC resource"),
        ("resource", "aws_subnet", "VPC", "Provides an VPC subnet resource"),
        (
            "resource",
            "aws_internet_gateway",
            "VPC",
            "Provides a resource to create a VPC Internet Gateway",
        ),
        (
            "resource",
            "aws_route_table",
            "VPC",
            "Provides a resource to create a VPC routing table",
        ),
        ("resource", "aws_route", "VPC", "Provides a resource to create a routing table entry"),
        ("resource", "aws_nat_gateway", "VPC", "Provides a resource to create a VPC NAT Gateway"),
        ("resource", "aws_eip", "EC2", "Provides an Elastic IP resource"),
        ("resource", "aws_lb", "ELB", "Provides a Load Balancer resource"),
        (
            "resource",
            "aws_lb_target_group",
            "ELB",
            "Provides a Load Balancer Target Group resource",
        ),
        ("resource", "aws_iam_role", "IAM", "Provides an IAM role"),
        ("resource", "aws_iam_policy", "IAM", "Provides an IAM policy"),
        ("resource", "aws_iam_user", "IAM", "Provides an IAM user"),
        ("resource", "aws_iam_group", "IAM", "Provides an IAM group"),
        (
            "resource",
            "aws_iam_role_policy_attachment",
            "IAM",
            "Attaches a Managed IAM Policy to an IAM role",
        ),
        ("resource", "aws_lambda_function", "Lambda", "Provides a Lambda Function resource"),
        ("resource", "aws_lambda_permission", "Lambda", "Creates a Lambda permission"),
        ("resource", "aws_lambda_alias", "Lambda", "Creates a Lambda function alias"),
        (
            "resource",
            "aws_cloudwatch_log_group",
            "CloudWatch",
            "Provides a CloudWatch Log Group resource",
        ),
        (
            "resource",
            "aws_cloudwatch_metric_alarm",
            "CloudWatch",
            "Provides a CloudWatch Metric Alarm resource",
        ),
        ("data_source", "aws_ami", "EC2", "Get information on an Amazon Machine Image (AMI)"),
        ("data_source", "aws_availability_zones", "EC2", "Provides a list of Availability Zones"),
        ("data_source", "aws_vpc", "VPC", "Provides details about a specific VPC"),
        ("data_source", "aws_subnet", "VPC", "Provides details about a specific subnet"),
        (
            "data_source",
            "aws_security_group",
            "EC2",
            "Provides details about a specific security group",
        ),
        ("data_source", "aws_instance", "EC2", "Get information on an Amazon EC2 Instance"),
        ("data_source", "aws_caller_identity", "IAM", "Get information about the caller identity"),
        ("data_source", "aws_region", "AWS", "Provides details about the region"),
        ("data_source", "aws_s3_bucket", "S3", "Provides details about a specific S3 bucket"),
    ]
)
