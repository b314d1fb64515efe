"""
AWS resource type mapper.

Resolves canvas aliases ("ec2-instance", "alb", "s3-bucket", ...) and
PascalCase resource names ("VPC", "IAMRole") to AWS ResourceTypes.
"""

from typing import Dict, Optional

from infragraph.domain.resource import CloudProvider, ResourceType
from infragraph.domain.type_mapper import STATIC_RESOURCE_TYPES, ResourceTypeMapper

# resource name -> aliases accepted on the canvas
RESOURCE_ALIASES: Dict[str, list] = {
    "VPC": ["vpc"],
    "Subnet": ["subnet"],
    "RouteTable": ["route-table", "route_table"],
    "SecurityGroup": ["security-group", "security_group", "sg"],
    "InternetGateway": ["internet-gateway", "internet_gateway", "igw"],
    "NATGateway": ["nat-gateway", "nat_gateway", "nat"],
    "ElasticIP": ["elastic-ip", "elastic_ip", "eip"],
    "EC2": ["ec2", "instance", "ec2-instance"],
    "Lambda": ["lambda", "lambda-function"],
    "LoadBalancer": ["load-balancer", "load_balancer", "elb", "alb", "nlb"],
    "AutoScalingGroup": ["autoscaling-group", "auto-scaling-group", "auto_scaling_group", "asg"],
    "S3": ["s3", "s3-bucket", "bucket"],
    "EBS": ["ebs", "ebs-volume", "volume"],
    "RDS": ["rds", "rds-instance"],
    "DynamoDB": ["dynamodb", "dynamo-db"],
    "IAMPolicy": ["iam-policy", "aws_iam_policy"],
    "IAMUser": ["iam-user", "aws_iam_user", "user"],
    "IAMRole": ["iam-role", "aws_iam_role", "role"],
    "IAMRolePolicyAttachment": ["iam-role-policy-attachment", "aws_iam_role_policy_attachment"],
}


class AWSResourceTypeMapper(ResourceTypeMapper):

    def __init__(self):
        types = STATIC_RESOURCE_TYPES[CloudProvider.AWS].values()
        self._by_name: Dict[str, ResourceType] = {rt.name: rt for rt in types}
        self._by_alias: Dict[str, ResourceType] = {}
        for name, aliases in RESOURCE_ALIASES.items():
            for alias in aliases:
                self._by_alias[alias] = self._by_name[name]

    def map_ir_type(self, ir_type: str) -> Optional[ResourceType]:
        if not ir_type:
            return None
        resolved = self._by_alias.get(ir_type) or self._by_alias.get(ir_type.lower())
        if resolved is not None:
            return resolved
        # the canvas sometimes sends the resource name itself, e.g. "IAMPolicy"
        return self.map_resource_name(ir_type)

    def map_resource_name(self, resource_name: str) -> Optional[ResourceType]:
        return self._by_name.get(resource_name)
