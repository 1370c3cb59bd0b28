"""SimpleDrive: blob storage behind interchangeable backends."""
