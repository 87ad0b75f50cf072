KIB = 1024
MIB = 1024 * 1024

def format_size(num_bytes: int) -> str:
    """Human readable size, e.g. 512 B, 3.4 KB, 1.2 MB."""
    if num_bytes < KIB:
        return f"{num_bytes} B"
    if num_bytes < MIB:
        return f"{num_bytes / KIB:.1f} KB"
    return f"{num_bytes / MIB:.1f} MB"

def delete_confirmation(count: int) -> str:
    if count == 1:
        return "Delete this photo?"
    return f"Delete these {count} photos?"
