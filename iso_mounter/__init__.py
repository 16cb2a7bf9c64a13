"""ISO Mounter - bounded, privilege-aware ISO image mounting for Linux hosts."""
