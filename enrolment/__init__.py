"""Student enrolment wizard for the Safety Training Academy."""
