"""Protocol transports used by the relay actuator."""
