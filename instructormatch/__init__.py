"""InstructorMatch marketplace API."""
