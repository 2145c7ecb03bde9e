"""Constants for the Pub/Sub Channel Operator."""

# API Groups
API_GROUP = "events.cloud.run"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"
PUBSUB_API_GROUP = "pubsub.cloud.run"
PUBSUB_API_GROUP_VERSION = f"{PUBSUB_API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_CHANNEL = "Channel"
KIND_TOPIC = "Topic"
KIND_PULL_SUBSCRIPTION = "PullSubscription"

# Plurals
PLURAL_CHANNELS = "channels"
PLURAL_TOPICS = "topics"
PLURAL_PULL_SUBSCRIPTIONS = "pullsubscriptions"

# Controller
CONTROLLER_AGENT_NAME = "cloud-run-events-channel-controller"

# Labels
LABEL_CONTROLLER = f"{API_GROUP}/controller"
LABEL_CHANNEL = f"{API_GROUP}/channel"

# Condition Types
COND_READY = "Ready"
COND_TOPIC_READY = "TopicReady"
COND_ADDRESSABLE = "Addressable"

# Condition Reasons
REASON_FAILED_CREATE = "FailedCreate"
REASON_EMPTY_HOSTNAME = "emptyHostname"
REASON_TOPIC_CREATED = "TopicCreated"

# Event Reasons
EVENT_REASON_TOPIC_CREATED = "TopicCreated"
EVENT_REASON_UPDATED = "Updated"
EVENT_REASON_UPDATE_FAILED = "UpdateFailed"
EVENT_REASON_INTERNAL_ERROR = "InternalError"

# Event Types
EVENT_TYPE_NORMAL = "Normal"
EVENT_TYPE_WARNING = "Warning"
