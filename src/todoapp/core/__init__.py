"""Ports, live sequences and observable state shared by the task subsystem and controllers."""
