"""Step kernel on PyTorch tensors, for CPU or CUDA devices."""
import torch

from .grid import SPECIES_A, SPECIES_B
from .kernel import CENTER_WEIGHT, CORNER_WEIGHT, EDGE_WEIGHT
from .params import kill_rate_profile, resolve_feed_rate


def laplacian(Z):
    up = torch.roll(Z, 1, dims=0)
    down = torch.roll(Z, -1, dims=0)
    edges = up + down + torch.roll(Z, 1, dims=1) + torch.roll(Z, -1, dims=1)
    corners = (torch.roll(up, 1, dims=1) + torch.roll(up, -1, dims=1)
               + torch.roll(down, 1, dims=1) + torch.roll(down, -1, dims=1))
    return edges * EDGE_WEIGHT + corners * CORNER_WEIGHT + Z * CENTER_WEIGHT


class TorchKernel:
    name = "torch"

    def __init__(self, device=None):
        if device is None:
            device = "cuda" if torch.cuda.is_available() else "cpu"
        self.device = torch.device(device)

    def __call__(self, current, out, params):
        width = current.shape[1]
        field = torch.as_tensor(current, device=self.device)
        kill_rate = torch.as_tensor(kill_rate_profile(params, width), dtype=field.dtype, device=self.device)
        feed_rate = resolve_feed_rate(params)

        lap = laplacian(field)
        U, V = field[..., SPECIES_A], field[..., SPECIES_B]
        Lu, Lv = lap[..., SPECIES_A], lap[..., SPECIES_B]
        reaction = U * V * V
        U_next = U + (params.d_a * Lu - reaction + feed_rate * (1 - U))
        V_next = V + (params.d_b * Lv + reaction - (feed_rate + kill_rate) * V)

        result = torch.stack([U_next, V_next], dim=-1).clamp_(0, 1)
        out[...] = result.cpu().numpy()
