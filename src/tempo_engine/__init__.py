"""Tempo engine — guided resistance-training timer core."""
