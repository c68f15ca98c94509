# Platform adapters for the Ninebot check-in runner
