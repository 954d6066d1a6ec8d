"""Identity domain: durable user id reconciled across two local stores."""
