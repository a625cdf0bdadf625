"""ClinicalTrials.gov access and record assembly."""
