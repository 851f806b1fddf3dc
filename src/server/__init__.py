"""HTTP and WebSocket surface for a LiftCar car."""
